"""Models - Stan-backed hierarchical regression and ANOVA."""
