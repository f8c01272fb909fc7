"""Ready-made hooks; WriterHook writes formatted entries to a stream."""