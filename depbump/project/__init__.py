"""Local Project Driver: git, Node toolchain and package manager steps for one checkout."""
