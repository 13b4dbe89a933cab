"""Restaurant platform account backend."""
