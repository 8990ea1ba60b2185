"""Domain services: every write that touches more than one row lives here."""
