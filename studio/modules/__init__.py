"""Domain modules: accounts, wallets, recharges, generation, gallery, chat, backup."""
