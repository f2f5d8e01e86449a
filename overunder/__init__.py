"""EuroLeague over/under season scraper."""
