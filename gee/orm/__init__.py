"""A tiny object-relational mapper over SQLite."""