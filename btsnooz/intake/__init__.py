"""Input side: locating, sniffing, and inflating btsnooz payloads."""
