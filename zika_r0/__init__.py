# Zika R0 Estimation
"""
Zika R0 Estimation (Colombia 2015/2016)
Bayesian hierarchical regression of early outbreak growth per department.

Project Structure:
    zika_r0/
    ├── common/        - Shared utilities
    ├── data/          - Loading, validation and synthetic outbreak data
    ├── models/        - Stan model wrappers (hierarchical regression, ANOVA)
    ├── stan_models/   - Stan programs
    ├── evaluation/    - Posterior predictive checks
    ├── postprocess/   - R0 estimates and predicted values
    └── visualization/ - Plotting utilities
"""

__version__ = "0.1.0"
__author__ = "Zika R0 Team"
