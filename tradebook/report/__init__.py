"""Terminal and HTML reporting for tradebook."""
