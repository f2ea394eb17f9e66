"""
Fintrack - Source Package

A small personal finance tracker: a Streamlit client that records
income/expense transactions and asks an LLM for spending insights,
backed by a stateless action router over a two-table spreadsheet.

DESIGN PRINCIPLES:
1. The spreadsheet is the database - rows are addressed by position
2. Every action answers with the same JSON envelope
3. Failures degrade to a readable message, never a crash
4. The client re-renders from a single state snapshot
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Fintrack Team"
