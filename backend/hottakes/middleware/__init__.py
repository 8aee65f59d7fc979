"""HotTakes API: HTTP middleware (request ids, access logging)."""
