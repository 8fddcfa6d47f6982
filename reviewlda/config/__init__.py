"""
Configuration package for ReviewLDA.
"""
