"""Remote API access: authenticated client, captcha solving, project directory."""
