"""Y (YeetYoink) interpreter."""
