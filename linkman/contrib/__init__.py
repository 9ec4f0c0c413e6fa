"""Optional Linkman apps built on the contact graph."""
