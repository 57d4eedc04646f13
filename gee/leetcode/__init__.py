"""Solutions to a few classic algorithm problems."""