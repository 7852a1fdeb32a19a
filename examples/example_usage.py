import sys
import os
# Add the project root to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import numpy as np
from symbolic_algebra import (
  Expression, ExpandOptions, LogLevel, SimplifyOptions, configure_logging,
  add, func, mul, power, var
)

def build_expressions():
  """A few expressions to play with"""
  x, y = var('x'), var('y')
  return {
    'linear': Expression(add(mul(2, x), mul(4, y))),
    'square': Expression(mul(add(x, 1), add(x, 1))),
    'trig': Expression(func('sin', power(x, 2))),
    'parsed': Expression.from_string("x^3 - 2*x + ln(x)"),
  }

def show_simplification(expressions):
  print("\n=== Simplification ===")
  for name, expr in expressions.items():
    print(f"{name:>8}: {expr}")
    print(f"{'':>8}  collect  -> {expr.collect()}")
    print(f"{'':>8}  factor   -> {expr.factor()}")
    print(f"{'':>8}  simplify -> {expr.simplify()}")

  square = expressions['square']
  print(f"\nSingle pass: {square.simplify(SimplifyOptions(single_pass=True))}")
  print(f"Expanded:    {square.expand().collect()}")

  tangent = Expression(func('tan', var('x')))
  print(f"Trig expansion: {tangent.expand(ExpandOptions(expand_trig=True))}")

def show_derivatives(expressions):
  print("\n=== Derivatives ===")
  for name, expr in expressions.items():
    d = expr.derivative('x')
    print(f"{name:>8}: d/dx {expr} = {d}")
    print(f"{'':>8}  simplified: {d.simplify()}")
    print(f"{'':>8}  latex:      {d.to_latex()}")

  grad = expressions['linear'].gradient(['x', 'y'])
  print("\nGradient of", expressions['linear'])
  for variable, part in grad.items():
    print(f"  d/d{variable} = {part}")

def check_against_finite_differences(expr):
  """Compare the symbolic derivative with a central difference"""
  points = np.linspace(0.5, 2.0, 5)
  h = 1e-6
  estimate = (expr.evaluate_array({'x': points + h}) - expr.evaluate_array({'x': points - h})) / (2 * h)
  exact = expr.derivative('x').evaluate_array({'x': points})
  print("\n=== Finite difference check ===")
  print(f"Expression: {expr}")
  print(f"Max abs error: {np.max(np.abs(exact - estimate)):.2e}")

def main():
  # DETAILED prints one line per simplify round
  configure_logging(LogLevel.DETAILED)

  expressions = build_expressions()
  show_simplification(expressions)
  show_derivatives(expressions)
  check_against_finite_differences(expressions['parsed'])

  # Exact high-precision evaluation
  print("\n=== Evaluation ===")
  print(f"parsed at x=2: {expressions['parsed'].evaluate({'x': 2})}")

if __name__ == "__main__":
  main()
