"""Android Publisher API: transport, wire models, endpoint client."""
