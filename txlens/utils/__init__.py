"""Amount conversions and signature-list helpers."""
