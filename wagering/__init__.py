"""Integer-exact odds, payout, allocation and settlement rules."""
