"""liveconfig: a single live configuration record served over HTTP."""
