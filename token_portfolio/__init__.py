"""Token portfolio tracker — price cache, valuation and level engine."""
