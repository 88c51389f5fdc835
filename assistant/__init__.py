"""Role-based chat sessions backed by a hosted Gemini model."""
