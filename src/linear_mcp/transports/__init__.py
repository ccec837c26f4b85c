"""Transport entry points; core never imports from here."""
