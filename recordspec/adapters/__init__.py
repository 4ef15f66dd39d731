"""Reference adapters implementing the record store and metadata protocols."""
