"""Contexts, node and VM types, cycle state and plugin base classes of the scheduler."""