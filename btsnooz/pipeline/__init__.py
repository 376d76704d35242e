"""Decoding pipeline: record iteration, classification, version dispatch, btsnoop emission."""
