"""
Mantra Counter - live Hare Krishna maha-mantra counting from speech transcripts.

This package provides:
- Phonetic normalization of English and Devanagari recognizer output
- A two-cycle sliding window over recognized chant words
- Global alignment against the 16-word maha-mantra to find missed names
- Write-through name / mantra / round counters
- A serialized engine that restarts the recognizer every few seconds

Main entry point: python -m mantracounter
"""

__version__ = "1.0.0"
