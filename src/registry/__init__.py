"""Remote coob repository access: catalog listing, archive fetch, manifest."""
