"""Interactive shell driving a browser with natural-language instructions."""
