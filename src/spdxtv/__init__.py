"""Read, validate and write SPDX documents in the tag-value format."""
