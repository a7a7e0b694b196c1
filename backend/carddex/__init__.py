"""
CardDex progression backend.

Badge evaluation, award ledger, progress projection and streak calendar
for trading card collectors.
"""
