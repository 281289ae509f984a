"""Built-in pipeline modules shipped with doclayer."""
