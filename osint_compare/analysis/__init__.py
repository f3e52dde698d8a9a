"""Tool Result Analysis.

  1. Metric Evaluator — weighted quality score per tool result
  2. Result Comparator — diff report between two tool results

Input:  ToolResult (with a StandardizedResponse from the normalizer)
Output: overall score / DiffReport
"""
