"""JSON API and certificate page served by the Flask server behind Dash."""
