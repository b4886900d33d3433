"""CryptoQuest quiz backend: profiles, score ledger and leaderboard."""
