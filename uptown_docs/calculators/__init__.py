"""Financial calculators — money coercion, down payment, remaining balance."""
