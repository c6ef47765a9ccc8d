"""
Hebrew Palindrome Finder — letter-level palindromes in Hebrew text.

Architecture: Normalize → Scan every span → Resolve duplicates → (optional) Source lookup
Philosophy:  The letters decide. Points, punctuation and citations are noise.
"""

__version__ = "1.0.0"
