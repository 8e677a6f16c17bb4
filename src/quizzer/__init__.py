"""Terminal multiple-choice quizzes with persistent attempt history."""
