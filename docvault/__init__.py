"""DocVault: classified document management API."""
