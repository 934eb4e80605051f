"""Employee attrition modelling — load, scan, encode, split, select, evaluate."""
