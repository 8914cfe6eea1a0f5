"""Gallery service: multipart image uploads, listing and static assets."""
