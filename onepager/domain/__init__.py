"""Domain records and financial calculators."""
