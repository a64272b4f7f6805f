"""
Test suite for the lot kernel.

Focus areas:
- Event validation and decoding
- Event log ordering and range queries
- Fold semantics and split invariance
- Live projection vs batch fold agreement
- Paced replay timing and cancellation
"""
