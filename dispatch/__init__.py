#Matching pipeline pieces:
#policy            - tunables (precision, search prefix, tie tolerance, timeout)
#candidate_filter  - trie lookup + availability gate
#scoring           - distance ranking with the idle-longest tie-break
#dispatcher        - attempt_match, the one call that commits a match
#system            - RideSharingSystem facade used by control surfaces
#
#Import from the submodules directly: drivers.registry and rides.queue depend on
#dispatch.state_machines, so this package must not import them eagerly.
