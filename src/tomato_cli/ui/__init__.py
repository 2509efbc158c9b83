"""Full-screen interactive front end."""
