"""
Utility modules for ReviewLDA.

Cross-cutting concerns:
- Storage: dataset acquisition and artifact persistence
"""
