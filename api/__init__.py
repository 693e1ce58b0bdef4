"""Language-model backend clients."""
