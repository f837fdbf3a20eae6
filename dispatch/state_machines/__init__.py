#Status transition rules for drivers and ride requests.
#Pure functions over frozen models; callers store the returned instance.
