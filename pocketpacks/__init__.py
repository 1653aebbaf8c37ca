"""Booster pack opening simulator with a persistent collection ledger."""
