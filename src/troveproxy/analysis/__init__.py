"""Result analysis — text helpers and aggregate statistics over result pages."""
