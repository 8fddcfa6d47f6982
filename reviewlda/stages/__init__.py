"""
Preprocessing stages for ReviewLDA.

Each stage consumes the previous stage's table and returns a new,
narrower one:
- Record Loader
- Tokenizer / Lemmatizer
- Vocabulary Filter
- TF-IDF Pruner
- Matrix Builder
"""
