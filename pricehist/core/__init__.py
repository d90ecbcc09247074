"""pricehist core package."""
