"""
Topic modeling on top of the preprocessed document-term matrix.

- Estimator: interface to an external topic model, plus an LDA adapter
- Labeling: human-readable topic labels
- Summary: topics described against review metadata
"""
