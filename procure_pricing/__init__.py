"""Pricing and tax computation engine for procurement quotations and purchase orders."""
