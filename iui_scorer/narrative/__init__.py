"""
Optional narrative augmentation for scoring results.

The scoring engine never depends on this package.  Callers score first, then
may ask a provider for supplementary commentary; failures leave the result
untouched.

Modules
-------
provider    : NarrativeProvider protocol, NarrativeError, build_prompt().
rate_limit  : RateLimiter — non-blocking minimum-interval guard.
http_client : HttpNarrativeClient — httpx chat-completions provider.
augment     : AugmentedReport + augment().
"""
