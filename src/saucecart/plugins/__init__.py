"""pytest plugins shipped with saucecart."""
