"""Discovery pipeline: options, paths, walker, filters, loader, finder."""
