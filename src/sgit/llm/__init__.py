"""Language model access: budgeting, prompts and the API client."""
