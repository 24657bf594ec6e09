"""Exception handlers answering in the envelope format."""
