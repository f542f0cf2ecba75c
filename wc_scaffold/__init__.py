"""wc-scaffold: scaffold an event-driven web-components project and preview it."""
