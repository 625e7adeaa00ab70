"""HTTP surface for cluster-greeter."""
