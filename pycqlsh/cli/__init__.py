"""Front ends and command handlers for the shell."""
